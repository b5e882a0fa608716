from __future__ import annotations

from typing import Optional

import requests


class OpenDPDError(Exception):
    """Base class for every error raised by opendpd."""


class InvalidArgument(OpenDPDError, ValueError):
    """A caller-supplied argument was rejected before any request was made."""


class RequestFailed(OpenDPDError, requests.RequestException):
    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None, response=None):
        super().__init__(message, response=response)
        self.url = url
        self.status_code = status_code


class DecodeFailed(OpenDPDError, requests.RequestException):
    def __init__(self, message: str, url: Optional[str] = None, response=None):
        super().__init__(message, response=response)
        self.url = url


class UnknownField(RequestFailed):
    """The API reported that the requested column does not exist."""

    def __init__(self, field: str, dataset: str, url: Optional[str] = None, response=None):
        super().__init__(
            f"Field '{field}' not found or not queryable in dataset {dataset}.",
            url=url,
            status_code=400,
            response=response,
        )
        self.field = field
        self.dataset = dataset
