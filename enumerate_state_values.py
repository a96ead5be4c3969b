"""Enumerate all messages of a given BYTE length and record the chaining state per block.

For small message lengths, this script:
1. Generates all possible messages (256^N for N bytes)
2. Computes MD5 while tracking the (A, B, C, D) value after every block
3. Saves results to data/length/N.yaml or N.db (SQLite)

Usage:
    python enumerate_state_values.py <message_length_bytes>
    python enumerate_state_values.py 0      # 1 message (empty)
    python enumerate_state_values.py 1      # 256 messages
    python enumerate_state_values.py 2      # 65536 messages

    # Output to SQLite database instead of YAML
    python enumerate_state_values.py 2 --format sqlite

SQLite Schema:
    - metadata: message_length_bytes, total_messages
    - messages: id, message_hex, digest_hex
    - states: message_id, block_index, a, b, c, d
"""

from __future__ import annotations

import argparse
import os
import sqlite3
import sys
from typing import Dict, Generator, List

import yaml

from md5_cli import md5_with_state_tracking


def enumerate_messages(length_bytes: int) -> Generator[bytes, None, None]:
    """Generate all possible messages of the given byte length, in numeric order."""
    if length_bytes == 0:
        yield b""
        return

    for value in range(256 ** length_bytes):
        yield value.to_bytes(length_bytes, byteorder="big")


def _format_state(state) -> List[str]:
    return [f"{word:08x}" for word in state]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Enumerate all messages of a given BYTE length and record chaining states"
    )
    parser.add_argument(
        "length_bytes",
        type=int,
        help="Message length in BYTES (WARNING: 256^length messages will be generated)",
    )
    parser.add_argument(
        "--max-messages",
        type=int,
        default=1_000_000,
        help="Maximum number of messages to process (default: 1,000,000)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="data/length",
        help="Output directory (default: data/length)",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["yaml", "sqlite"],
        default="yaml",
        help="Output format: yaml or sqlite (default: yaml)",
    )
    args = parser.parse_args(argv)

    length_bytes = args.length_bytes
    if length_bytes < 0:
        print(f"ERROR: Message length must be non-negative (got {length_bytes})")
        return 1

    total_messages = 256 ** length_bytes

    print(f"Message length: {length_bytes} bytes")
    print(f"Total possible messages: {total_messages:,}")

    if total_messages > args.max_messages:
        print(f"ERROR: Too many messages ({total_messages:,} > {args.max_messages:,})")
        print("Use --max-messages to increase limit if you really want to proceed")
        return 1

    os.makedirs(args.output_dir, exist_ok=True)

    if args.format == "sqlite":
        _process_to_sqlite(args, length_bytes, total_messages)
    else:
        _process_to_yaml(args, length_bytes, total_messages)
    return 0


def _process_to_yaml(args, length_bytes: int, total_messages: int) -> None:
    """Process messages and save to YAML format."""
    results: Dict = {
        "message_length_bytes": length_bytes,
        "total_messages": total_messages,
        "messages": [],
    }

    print(f"Processing {total_messages:,} messages...")

    sample_entries = []
    for idx, message in enumerate(enumerate_messages(length_bytes)):
        if idx > 0 and idx % 10000 == 0:
            print(f"  Progress: {idx:,} / {total_messages:,} ({100*idx/total_messages:.1f}%)")

        digest, states = md5_with_state_tracking(message)

        entry = {
            "message_hex": message.hex(),
            "digest_hex": digest.hexdigest(),
            "blocks": [
                {"block_index": block_idx, "state": _format_state(state)}
                for block_idx, state in enumerate(states)
            ],
        }
        results["messages"].append(entry)

        if idx < 4:
            sample_entries.append(entry)

    output_path = os.path.join(args.output_dir, f"{length_bytes}.yaml")
    print(f"Writing results to {output_path}...")

    with open(output_path, "w") as f:
        yaml.dump(results, f, default_flow_style=False, sort_keys=False)

    print(f"Done! Saved {total_messages:,} message entries to {output_path}")
    _print_samples(sample_entries)


def _process_to_sqlite(args, length_bytes: int, total_messages: int) -> None:
    """Process messages and save to SQLite database."""
    output_path = os.path.join(args.output_dir, f"{length_bytes}.db")
    print(f"Processing {total_messages:,} messages to SQLite database...")

    if os.path.exists(output_path):
        os.remove(output_path)

    conn = sqlite3.connect(output_path)
    try:
        cursor = conn.cursor()
        cursor.executescript("""
            CREATE TABLE metadata (
                message_length_bytes INTEGER NOT NULL,
                total_messages INTEGER NOT NULL
            );

            CREATE TABLE messages (
                id INTEGER PRIMARY KEY,
                message_hex TEXT NOT NULL,
                digest_hex TEXT NOT NULL
            );

            CREATE TABLE states (
                message_id INTEGER NOT NULL,
                block_index INTEGER NOT NULL,
                a TEXT NOT NULL,
                b TEXT NOT NULL,
                c TEXT NOT NULL,
                d TEXT NOT NULL,
                FOREIGN KEY (message_id) REFERENCES messages(id)
            );

            CREATE INDEX idx_states_message ON states(message_id);
        """)
        cursor.execute(
            "INSERT INTO metadata VALUES (?, ?)",
            (length_bytes, total_messages),
        )

        BATCH_SIZE = 1000
        message_batch = []
        state_batch = []
        sample_entries = []

        for idx, message in enumerate(enumerate_messages(length_bytes)):
            if idx > 0 and idx % 10000 == 0:
                print(f"  Progress: {idx:,} / {total_messages:,} ({100*idx/total_messages:.1f}%)")

            digest, states = md5_with_state_tracking(message)
            message_hex = message.hex()
            digest_hex = digest.hexdigest()

            message_batch.append((idx, message_hex, digest_hex))
            for block_idx, state in enumerate(states):
                state_batch.append((idx, block_idx, *_format_state(state)))

            if idx < 4:
                sample_entries.append({"message_hex": message_hex, "digest_hex": digest_hex})

            if len(message_batch) >= BATCH_SIZE:
                cursor.executemany("INSERT INTO messages VALUES (?, ?, ?)", message_batch)
                cursor.executemany("INSERT INTO states VALUES (?, ?, ?, ?, ?, ?)", state_batch)
                conn.commit()
                message_batch = []
                state_batch = []

        if message_batch:
            cursor.executemany("INSERT INTO messages VALUES (?, ?, ?)", message_batch)
            cursor.executemany("INSERT INTO states VALUES (?, ?, ?, ?, ?, ?)", state_batch)
            conn.commit()
    finally:
        conn.close()

    print(f"Done! Saved {total_messages:,} message entries to {output_path}")
    _print_samples(sample_entries)


def _print_samples(sample_entries: List[Dict]) -> None:
    """Print sample entries from the results."""
    print("\nSample entries:")
    for i, sample in enumerate(sample_entries):
        print(f"  [{i}] hex={sample['message_hex'] or '(empty)':<8} digest={sample['digest_hex'][:16]}...")


if __name__ == "__main__":
    sys.exit(main())
