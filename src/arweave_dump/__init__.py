"""The main public API of arweave_dump."""

from __future__ import annotations

from arweave_dump._errors import ArweaveDumpError as ArweaveDumpError
from arweave_dump._errors import ChunkError as ChunkError
from arweave_dump._errors import ChunkPendingError as ChunkPendingError
from arweave_dump._errors import CountOverflowError as CountOverflowError
from arweave_dump._errors import DataPendingError as DataPendingError
from arweave_dump._errors import DecodeBundleError as DecodeBundleError
from arweave_dump._errors import MalformedInputError as MalformedInputError
from arweave_dump._errors import SchemaDecodeError as SchemaDecodeError
from arweave_dump._errors import ShortOrEmptyChunkError as ShortOrEmptyChunkError
from arweave_dump._errors import TransportError as TransportError
from arweave_dump._errors import TruncatedInputError as TruncatedInputError
from arweave_dump._errors import (
    UnsupportedSignatureVariantError as UnsupportedSignatureVariantError,
)
from arweave_dump.chunks import ChunkReader as ChunkReader
from arweave_dump.chunks import chunk_stream as chunk_stream
from arweave_dump.client import ArweaveClient as ArweaveClient
from arweave_dump.client import TransactionOffset as TransactionOffset
from arweave_dump.client import TxMetadata as TxMetadata
from arweave_dump.constants import SignatureType as SignatureType
from arweave_dump.dataitem import BundleTag as BundleTag
from arweave_dump.dataitem import DataItem as DataItem
from arweave_dump.decode import BundleEntry as BundleEntry
from arweave_dump.decode import ReadableBundleStream as ReadableBundleStream
from arweave_dump.decode import read_bundle as read_bundle
from arweave_dump.decode import read_data_item as read_data_item
from arweave_dump.jsonarray import JsonArrayWriter as JsonArrayWriter
from arweave_dump.tags import decode_tags as decode_tags
