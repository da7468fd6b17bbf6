"""The arweave-dump command: save the data items of a bundle transaction as JSON."""

from __future__ import annotations

import io
import logging
from pathlib import Path

import typer

from arweave_dump._errors import ArweaveDumpError
from arweave_dump.chunks import ChunkReader
from arweave_dump.client import ArweaveClient
from arweave_dump.config import Settings
from arweave_dump.decode import read_bundle
from arweave_dump.jsonarray import JsonArrayWriter

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="arweave-dump",
    help="Dump the data items of an Arweave ANS-104 bundle transaction to JSON.",
    add_completion=False,
)


def dump_bundle(
    client: ArweaveClient, transaction_id: str, output_file: Path, *, stream: bool
) -> int:
    """Decode a bundle transaction's data items into a JSON array file.

    Returns
    -------
    :
        The number of data items written.
    """
    source: io.RawIOBase | io.BytesIO
    if stream:
        source = ChunkReader(client.transaction_chunks(transaction_id))
    else:
        source = io.BytesIO(client.fetch_transaction_data(transaction_id))

    with source, output_file.open("w", encoding="utf-8") as fp:
        with JsonArrayWriter(fp) as writer:
            for item in read_bundle(source):
                writer.write_item(item.to_json())
    return writer.count


@app.command()
def dump(
    transaction_id: str = typer.Argument(..., help="Transaction ID to fetch."),
    output_file: Path | None = typer.Option(
        None,
        "--output-file",
        "-o",
        help="JSON output file name. Default: <TRANSACTION_ID>.json",
    ),
    stream: bool | None = typer.Option(
        None,
        "--stream/--no-stream",
        help="Fetch the bundle chunk by chunk, or in a single request.",
    ),
    gateway: str | None = typer.Option(
        None, "--gateway", help="Arweave gateway URL."
    ),
) -> None:
    """Fetch a bundle transaction and write its data items to a JSON file."""
    settings = Settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )
    if output_file is None:
        output_file = Path(f"{transaction_id}.json")
    if stream is None:
        stream = settings.stream

    try:
        with ArweaveClient(
            gateway or settings.gateway_url, timeout=settings.timeout
        ) as client:
            tx = client.fetch_transaction(transaction_id)
            if not tx.is_bundle():
                typer.echo(
                    f"Error: Transaction {transaction_id} is not an ANS-104 bundle",
                    err=True,
                )
                raise typer.Exit(code=1)
            count = dump_bundle(client, transaction_id, output_file, stream=stream)
    except ArweaveDumpError as e:
        logger.debug("Failed to dump %s", transaction_id, exc_info=True)
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e

    typer.echo(f"Bundle data stored in: {output_file} ({count} data items)")
