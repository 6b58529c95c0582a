"""Thin adapter for interacting with Amazon S3."""

from collections.abc import Mapping
from typing import Any, Protocol

import boto3

from core.utils.settings import StorageSettings


class _Boto3S3Client(Protocol):
    """Internal typing for boto3 S3 client (AWS-facing only)."""

    def put_object(self, **kwargs: Any) -> Any: ...

    def head_object(self, *, Bucket: str, Key: str) -> Mapping[str, Any]: ...

    def delete_object(self, *, Bucket: str, Key: str) -> Any: ...

    def list_objects_v2(self, **kwargs: Any) -> Mapping[str, Any]: ...

    def head_bucket(self, *, Bucket: str) -> Any: ...

    def generate_presigned_url(
        self,
        ClientMethod: str,
        Params: Mapping[str, Any],
        ExpiresIn: int,
    ) -> str: ...


class S3AdapterProtocol(Protocol):
    """Minimal S3 adapter protocol (repository-facing)."""

    bucket: str

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        metadata: dict[str, str],
        cache_control: str | None = None,
        acl: str | None = None,
    ) -> None: ...

    def head_object(self, *, key: str) -> Mapping[str, Any]: ...

    def delete_object(self, *, key: str) -> None: ...

    def list_objects(
        self,
        *,
        prefix: str,
        max_keys: int,
        continuation_token: str | None = None,
    ) -> Mapping[str, Any]: ...

    def head_bucket(self) -> None: ...

    def generate_presigned_url(
        self,
        *,
        method: str,
        params: dict[str, Any],
        expires_in: int,
    ) -> str: ...


class S3Adapter:
    """Low-level S3 operations (mechanical, no error handling).

    This adapter:
    - Wraps boto3 S3 client
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors
    """

    def __init__(self, settings: StorageSettings | None = None) -> None:
        """Create S3 client from settings (environment by default)."""
        settings = settings or StorageSettings.from_env()

        self.bucket = settings.bucket_name
        self._client: _Boto3S3Client = boto3.client(
            "s3",
            endpoint_url=settings.endpoint_url,
            region_name=settings.region,
        )

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        metadata: dict[str, str],
        cache_control: str | None = None,
        acl: str | None = None,
    ) -> None:
        """Store object in S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        kwargs: dict[str, Any] = {
            "Bucket": self.bucket,
            "Key": key,
            "Body": body,
            "ContentType": content_type,
            "Metadata": metadata,
        }

        if cache_control:
            kwargs["CacheControl"] = cache_control

        if acl:
            kwargs["ACL"] = acl

        self._client.put_object(**kwargs)

    def head_object(self, *, key: str) -> Mapping[str, Any]:
        """Fetch object metadata from S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        return self._client.head_object(Bucket=self.bucket, Key=key)

    def delete_object(self, *, key: str) -> None:
        """Delete object from S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        self._client.delete_object(
            Bucket=self.bucket,
            Key=key,
        )

    def list_objects(
        self,
        *,
        prefix: str,
        max_keys: int,
        continuation_token: str | None = None,
    ) -> Mapping[str, Any]:
        """List one page of objects under a prefix."""
        kwargs: dict[str, Any] = {
            "Bucket": self.bucket,
            "Prefix": prefix,
            "MaxKeys": max_keys,
        }

        if continuation_token:
            kwargs["ContinuationToken"] = continuation_token

        return self._client.list_objects_v2(**kwargs)

    def head_bucket(self) -> None:
        """Raises boto3 exceptions when the bucket is missing or unreachable."""
        self._client.head_bucket(Bucket=self.bucket)

    def generate_presigned_url(
        self,
        *,
        method: str,
        params: dict[str, Any],
        expires_in: int,
    ) -> str:
        """Generate a pre-signed S3 URL."""
        return self._client.generate_presigned_url(
            ClientMethod=method,
            Params={**params, "Bucket": self.bucket},
            ExpiresIn=expires_in,
        )
