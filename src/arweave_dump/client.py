"""A client for the parts of the Arweave gateway HTTP API used to fetch bundles."""

from __future__ import annotations

import logging
from collections.abc import Generator, Mapping
from dataclasses import dataclass
from types import TracebackType
from typing import TYPE_CHECKING, Any, NamedTuple

import httpx

from arweave_dump._b64url import b64url_decode
from arweave_dump._errors import ChunkPendingError, DataPendingError, TransportError
from arweave_dump.chunks import chunk_stream
from arweave_dump.constants import (
    BUNDLE_FORMAT_BINARY,
    BUNDLE_FORMAT_TAG,
    BUNDLE_VERSION,
    BUNDLE_VERSION_TAG,
)

if TYPE_CHECKING:
    from typing_extensions import Self

logger = logging.getLogger(__name__)

DEFAULT_GATEWAY_URL = "https://arweave.net/"


@dataclass(frozen=True)
class TxMetadata:
    """The tags of a transaction, decoded to text."""

    tags: Mapping[str, str]

    def get_tag(self, name: str) -> str | None:
        return self.tags.get(name)

    def is_bundle(self) -> bool:
        """Check if the transaction's data is a binary ANS-104 bundle (version 2)."""
        if self.get_tag(BUNDLE_FORMAT_TAG) != BUNDLE_FORMAT_BINARY:
            return False
        return self.get_tag(BUNDLE_VERSION_TAG) == BUNDLE_VERSION


class TransactionOffset(NamedTuple):
    size: int
    """The size of the transaction's data in bytes."""
    offset: int
    """The absolute weave offset of the last byte of the transaction's data."""


class ArweaveClient:
    """Fetch transactions and their data from an Arweave gateway.

    Requests are not retried. A `DataPendingError` (or `ChunkPendingError`)
    means the gateway knows of the data but can't serve it yet, so the caller
    may want to try again later.

    Examples
    --------
    >>> with ArweaveClient() as client:  # doctest: +SKIP
    ...     if client.fetch_transaction(tx_id).is_bundle():
    ...         chunks = client.transaction_chunks(tx_id)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_GATEWAY_URL,
        *,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._http = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            follow_redirects=True,
        )

    @property
    def base_url(self) -> httpx.URL:
        return self._http.base_url

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _get(self, path: str, *, chunk_offset: int | None = None) -> httpx.Response:
        request = self._http.build_request("GET", path)
        url = str(request.url)
        try:
            response = self._http.send(request)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"Gateway responded with HTTP {e.response.status_code}", url=url
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Request to gateway failed: {e}", url=url) from e

        logger.debug("GET %s: HTTP %d", url, response.status_code)
        if response.status_code == httpx.codes.ACCEPTED:
            if chunk_offset is not None:
                raise ChunkPendingError(
                    "Chunk is not available yet", offset=chunk_offset, url=url
                )
            raise DataPendingError("Data is not available yet", url=url)
        return response

    def _get_json(self, path: str, *, chunk_offset: int | None = None) -> Any:
        response = self._get(path, chunk_offset=chunk_offset)
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                "Gateway response is not valid JSON", url=str(response.url)
            ) from e

    def fetch_transaction(self, tx_id: str) -> TxMetadata:
        path = f"tx/{tx_id}"
        tx = self._get_json(path)
        try:
            tags = {
                b64url_decode(tag["name"]).decode(): b64url_decode(tag["value"]).decode()
                for tag in tx["tags"]
            }
        except (KeyError, TypeError, ValueError) as e:
            raise TransportError(
                f"Gateway returned a transaction with invalid tags: {e}",
                url=str(self.base_url.join(path)),
            ) from e
        return TxMetadata(tags)

    def fetch_transaction_data(self, tx_id: str) -> bytes:
        """Fetch the whole of a transaction's data in one request."""
        response = self._get(f"tx/{tx_id}/data")
        try:
            return b64url_decode(response.text)
        except ValueError as e:
            raise TransportError(
                "Gateway returned transaction data that is not base64url",
                url=str(response.url),
            ) from e

    def fetch_transaction_offset(self, tx_id: str) -> TransactionOffset:
        path = f"tx/{tx_id}/offset"
        offset = self._get_json(path)
        try:
            return TransactionOffset(
                size=int(offset["size"]), offset=int(offset["offset"])
            )
        except (KeyError, TypeError, ValueError) as e:
            raise TransportError(
                f"Gateway returned an invalid transaction offset: {e}",
                url=str(self.base_url.join(path)),
            ) from e

    def fetch_chunk(self, offset: int) -> bytes:
        """Fetch the chunk that starts at an absolute weave offset."""
        path = f"chunk/{offset}"
        chunk = self._get_json(path, chunk_offset=offset)
        try:
            return b64url_decode(chunk["chunk"])
        except (KeyError, TypeError, ValueError) as e:
            raise TransportError(
                f"Gateway returned an invalid chunk: {e}",
                url=str(self.base_url.join(path)),
            ) from e

    def transaction_chunks(self, tx_id: str) -> Generator[bytes, None, None]:
        """Fetch a transaction's data one chunk at a time.

        The transaction's offset is fetched immediately. Chunks are fetched as
        the returned generator is advanced.
        """
        size, offset = self.fetch_transaction_offset(tx_id)
        logger.info("Transaction %s has %d bytes of data", tx_id, size)
        return chunk_stream(self.fetch_chunk, size=size, end_offset=offset)
