"""
Example usage of lazyfile.

This example shows the three ways a MaterializingStream is usually
consumed: read sequentially, asked for its length, or asked for a
file path that some other tool needs.
"""

import io
import logging
import zlib

from lazyfile import MaterializingStream, get_stream, StreamError


def sequential_example():
    """Example: Reading a stream without ever touching the disk."""
    print("=== Sequential Read Example ===")

    stream = get_stream(b"x" * 1024 * 100)  # 100KB buffer

    checksum = 0
    total = 0
    while True:
        chunk = stream.read(8192)
        if not chunk:
            break
        checksum = zlib.crc32(chunk, checksum)
        total += len(chunk)

    print(f"Read {total} bytes, crc32={checksum:#010x}")
    print(f"Stream closed itself: {stream.closed}")


def file_example():
    """Example: Handing a path to code that cannot take a stream."""
    print("\n=== Materialization Example ===")

    # A non-seekable source, e.g. a socket or a pipe
    source = io.BufferedReader(io.BytesIO(b"line one\nline two\nline three\n"))

    with MaterializingStream(source) as stream:
        path = stream.get_file()
        print(f"Backing file: {path}")
        print(f"Length: {stream.get_length()} bytes")

        with open(path, "rb") as f:
            print(f"Lines in file: {len(f.readlines())}")

        # The stream itself is still readable, now from the file
        print(f"First bytes: {stream.read(8)!r}")

    print(f"Backing file removed: {not path.exists()}")


def error_example():
    """Example: Asking for a file after reading has started."""
    print("\n=== Error Handling Example ===")

    stream = MaterializingStream(io.BytesIO(b"partially consumed"))
    stream.read(9)

    try:
        stream.get_file()
    except StreamError as e:
        print(f"Refused: {e}")
    finally:
        stream.close()


def main():
    """Run all examples."""
    logging.basicConfig(level=logging.DEBUG)

    sequential_example()
    file_example()
    error_example()


if __name__ == "__main__":
    main()
