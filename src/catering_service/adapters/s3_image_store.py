"""Amazon S3 image store adapter.

Stores catering images in a single bucket. Keys are generated as
``prefix + uuid4 + original extension`` so uploads never overwrite each other.
"""

import logging
import uuid

from botocore.exceptions import ClientError
from mypy_boto3_s3.client import S3Client

from catering_service.adapters.base_adapter import ImageStore, ImageUpload
from catering_service.exceptions import BadRequestError, InternalServerError
from catering_service.observability.metrics import record_image_upload

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 10 * 1024 * 1024
ALLOWED_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp")
NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


class S3ImageStore(ImageStore):
    """S3-backed implementation of ImageStore."""

    def __init__(self, s3_client: S3Client, bucket_name: str) -> None:
        """Initialize the S3 image store.

        Args:
            s3_client: Boto3 S3 client
            bucket_name: Bucket holding all catering images
        """
        self.s3_client = s3_client
        self.bucket_name = bucket_name

    def upload(self, image: ImageUpload, destination_prefix: str) -> str:
        """Validate an image and store it under a freshly generated key.

        Args:
            image: The image to store
            destination_prefix: Key prefix, e.g. "menu/"

        Returns:
            str: The generated object key

        Raises:
            BadRequestError: If the image is empty, larger than 10 MiB, or not an
                allowed image type
            InternalServerError: If S3 rejects the upload
        """
        logger.info(f"Uploading image to S3: {image.filename}")
        self._validate(image)

        key = self._generate_key(destination_prefix, image.filename or "")

        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=image.content,
                ContentType=image.content_type or "application/octet-stream",
            )
        except ClientError as e:
            logger.error(f"S3 upload failed for {key}: {e}")
            raise InternalServerError(
                "Failed to upload file to S3", context={"key": key, "error": str(e)}
            ) from e

        record_image_upload(destination_prefix, image.size)
        logger.info(f"File uploaded successfully: {key}")
        return key

    def replace(self, existing_key: str, image: ImageUpload) -> str:
        """Replace an existing object with a new image under the same prefix.

        The new object is written before the old one is removed, so a failed
        upload leaves the existing object untouched.

        Args:
            existing_key: Key of the object being replaced
            image: The new image

        Returns:
            str: The key of the new object

        Raises:
            BadRequestError: If the image is invalid or existing_key does not exist
            InternalServerError: If S3 fails during upload or delete
        """
        logger.info(f"Replacing file in S3: {existing_key}")
        self._validate(image)

        if not self.exists(existing_key):
            logger.warning(f"File not found for update: {existing_key}")
            raise BadRequestError(f"File not found: {existing_key}")

        prefix = existing_key[: existing_key.rfind("/") + 1]
        new_key = self.upload(image, prefix)
        self.delete(existing_key)
        return new_key

    def delete(self, key: str) -> None:
        """Remove an object from the bucket.

        Raises:
            InternalServerError: If S3 rejects the delete
        """
        logger.info(f"Deleting file from S3: {key}")

        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            logger.error(f"S3 delete failed for {key}: {e}")
            raise InternalServerError(
                "Failed to delete file from S3", context={"key": key, "error": str(e)}
            ) from e

        logger.info(f"File deleted successfully: {key}")

    def presign(self, key: str, expiration_minutes: int) -> str:
        """Generate a presigned GET URL.

        The key is not checked for existence.

        Args:
            key: Object key
            expiration_minutes: URL lifetime in minutes

        Returns:
            str: Presigned URL
        """
        logger.info(f"Generating presigned URL for: {key}")

        try:
            url: str = self.s3_client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket_name, "Key": key},
                ExpiresIn=expiration_minutes * 60,
            )
        except ClientError as e:
            logger.error(f"Failed to generate presigned URL for {key}: {e}")
            raise InternalServerError(
                "Failed to generate presigned URL", context={"key": key, "error": str(e)}
            ) from e

        return url

    def exists(self, key: str) -> bool:
        """Check whether an object exists using a HEAD request.

        Raises:
            InternalServerError: If S3 fails for a reason other than a missing key
        """
        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=key)
            return True
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in NOT_FOUND_CODES:
                return False
            logger.error(f"Error checking file existence for {key}: {e}")
            raise InternalServerError(
                "Failed to check file existence", context={"key": key, "error": str(e)}
            ) from e

    def _validate(self, image: ImageUpload | None) -> None:
        if image is None or image.is_empty:
            raise BadRequestError("File cannot be empty")

        if image.size > MAX_FILE_SIZE:
            raise BadRequestError(
                "File size exceeds maximum limit of 10MB", context={"size": image.size}
            )

        if not image.filename or not image.filename.lower().endswith(ALLOWED_EXTENSIONS):
            raise BadRequestError(
                "Invalid file type. Allowed: jpg, jpeg, png, gif, webp",
                context={"filename": image.filename},
            )

    @staticmethod
    def _generate_key(prefix: str, filename: str) -> str:
        extension = filename[filename.rfind(".") :]
        return f"{prefix}{uuid.uuid4()}{extension}"
