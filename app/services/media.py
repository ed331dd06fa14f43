import asyncio
import uuid

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile
from loguru import logger

from app.core.config import settings
from app.core.exceptions import AppException, ErrorType


def get_s3_client():
    return boto3.client(
        "s3",
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        region_name=settings.AWS_DEFAULT_REGION,
    )


async def upload_file(file: UploadFile, folder: str) -> str:
    """Stores the file in the S3 bucket and returns its public URL"""
    content = await file.read()
    unique_filename = f"{uuid.uuid4()}_{file.filename}"
    s3_file_path = f"{settings.S3_UPLOAD_FOLDER}/{folder}/{unique_filename}"

    try:
        s3 = get_s3_client()
        await asyncio.to_thread(
            s3.put_object,
            Bucket=settings.S3_BUCKET_NAME,
            Key=s3_file_path,
            Body=content,
            ContentType=file.content_type or "application/octet-stream",
        )
    except (BotoCoreError, ClientError) as e:
        logger.error(f"S3 upload of {file.filename} failed: {str(e)}")
        raise AppException(ErrorType.MEDIA_UPLOAD_FAILED)

    logger.info(f"Uploaded {file.filename} to s3://{settings.S3_BUCKET_NAME}/{s3_file_path}")
    return f"https://{settings.S3_BUCKET_NAME}.s3.{settings.AWS_DEFAULT_REGION}.amazonaws.com/{s3_file_path}"
