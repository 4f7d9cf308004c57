"""Object store gateway backed by an S3-compatible service (S3 or MinIO)."""

import logging
from functools import lru_cache
from typing import Any, BinaryIO

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from cloudspace.config import get_settings
from cloudspace.constants import (
    MSG_BUCKET_CREATE_ERROR,
    MSG_FILE_DELETE_ERROR,
    MSG_FILE_DOWNLOAD_ERROR,
    MSG_FILE_UPLOAD_ERROR,
    MSG_FOLDER_CREATE_ERROR,
    MSG_FOLDER_DELETE_ERROR,
)
from cloudspace.exceptions import ErrorType, ServiceError

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# S3 DeleteObjects accepts at most 1000 keys per request
DELETE_BATCH_SIZE = 1000


def _folder_key(folder: str) -> str:
    return folder if folder.endswith("/") else f"{folder}/"


class ObjectStorage:
    """Bucket/key based put, get and delete on top of a boto3 S3 client.

    Folders are emulated with a zero-length object whose key ends in ``/``.
    Every transport failure is raised as an internal ``ServiceError`` that keeps
    the underlying message.
    """

    def __init__(self, client: Any, region: str | None = None):
        self.client = client
        self.region = region

    def ensure_bucket(self, bucket: str) -> None:
        """Create the bucket unless it already exists."""
        try:
            try:
                self.client.head_bucket(Bucket=bucket)
                return
            except ClientError as e:
                if e.response.get("Error", {}).get("Code") not in ("404", "NoSuchBucket"):
                    raise

            params: dict[str, Any] = {"Bucket": bucket}
            if self.region and self.region != "us-east-1":
                params["CreateBucketConfiguration"] = {"LocationConstraint": self.region}
            self.client.create_bucket(**params)
            logger.debug(f"Bucket '{bucket}' created")
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error creating bucket '{bucket}': {e}")
            raise ServiceError(ErrorType.INTERNAL_SERVER_ERROR, MSG_BUCKET_CREATE_ERROR, e) from e

    def put_object(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str | None = None,
    ) -> None:
        """Store bytes at bucket/key, replacing any existing object."""
        try:
            self.client.put_object(
                Bucket=bucket,
                Key=key,
                Body=data,
                ContentType=content_type or DEFAULT_CONTENT_TYPE,
            )
            logger.debug(f"Object '{key}' uploaded to bucket '{bucket}'")
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error uploading '{key}' to bucket '{bucket}': {e}")
            raise ServiceError(ErrorType.INTERNAL_SERVER_ERROR, MSG_FILE_UPLOAD_ERROR, e) from e

    def get_object_stream(self, bucket: str, key: str) -> BinaryIO:
        """Open a read stream for bucket/key. The caller closes it."""
        try:
            response = self.client.get_object(Bucket=bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error retrieving '{key}' from bucket '{bucket}': {e}")
            raise ServiceError(ErrorType.INTERNAL_SERVER_ERROR, MSG_FILE_DOWNLOAD_ERROR, e) from e
        return response["Body"]

    def delete_object(self, bucket: str, key: str) -> None:
        try:
            self.client.delete_object(Bucket=bucket, Key=key)
            logger.debug(f"Object '{key}' deleted from bucket '{bucket}'")
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error deleting '{key}' from bucket '{bucket}': {e}")
            raise ServiceError(ErrorType.INTERNAL_SERVER_ERROR, MSG_FILE_DELETE_ERROR, e) from e

    def create_folder(self, bucket: str, folder: str) -> None:
        key = _folder_key(folder)
        try:
            self.client.put_object(Bucket=bucket, Key=key, Body=b"")
            logger.debug(f"Folder '{key}' created in bucket '{bucket}'")
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error creating folder '{key}' in bucket '{bucket}': {e}")
            raise ServiceError(ErrorType.INTERNAL_SERVER_ERROR, MSG_FOLDER_CREATE_ERROR, e) from e

    def delete_objects(self, bucket: str, keys: list[str]) -> None:
        """Delete the given keys in batches. A per-key failure fails the call."""
        try:
            for start in range(0, len(keys), DELETE_BATCH_SIZE):
                batch = keys[start : start + DELETE_BATCH_SIZE]
                response = self.client.delete_objects(
                    Bucket=bucket,
                    Delete={"Objects": [{"Key": key} for key in batch], "Quiet": True},
                )
                errors = response.get("Errors", [])
                if errors:
                    failed = ", ".join(error["Key"] for error in errors)
                    logger.error(f"Could not delete from bucket '{bucket}': {failed}")
                    raise ServiceError(
                        ErrorType.INTERNAL_SERVER_ERROR, MSG_FILE_DELETE_ERROR, failed
                    )
            logger.debug(f"{len(keys)} objects deleted from bucket '{bucket}'")
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error deleting objects in bucket '{bucket}': {e}")
            raise ServiceError(ErrorType.INTERNAL_SERVER_ERROR, MSG_FILE_DELETE_ERROR, e) from e

    def delete_folder(self, bucket: str, folder: str) -> None:
        """Delete the folder marker only.

        Keys under the prefix are left alone: after a rename, another
        workspace's files can live under the same folder name.
        """
        key = _folder_key(folder)
        try:
            self.client.delete_object(Bucket=bucket, Key=key)
            logger.debug(f"Folder '{key}' deleted from bucket '{bucket}'")
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error deleting folder '{key}' in bucket '{bucket}': {e}")
            raise ServiceError(ErrorType.INTERNAL_SERVER_ERROR, MSG_FOLDER_DELETE_ERROR, e) from e


def create_s3_client() -> Any:
    """Create a boto3 S3 client from settings, with bounded retries."""
    settings = get_settings()
    return boto3.client(
        "s3",
        endpoint_url=settings.s3_endpoint_url,
        aws_access_key_id=settings.s3_access_key,
        aws_secret_access_key=settings.s3_secret_key,
        region_name=settings.s3_region,
        config=Config(
            retries={"max_attempts": settings.s3_max_attempts, "mode": "standard"},
            s3={"addressing_style": "path"},
        ),
    )


@lru_cache
def get_storage() -> ObjectStorage:
    """Get cached object storage instance."""
    return ObjectStorage(create_s3_client(), region=get_settings().s3_region)
