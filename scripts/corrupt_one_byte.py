import sys
from pathlib import Path

def main():
    if len(sys.argv) not in (2, 3, 4):
        print("Usage: corrupt_one_byte.py <file> [offset] [value]")
        raise SystemExit(2)

    p = Path(sys.argv[1])
    b = bytearray(p.read_bytes())
    if len(b) < 2:
        print("File too small to corrupt safely.")
        raise SystemExit(2)

    # Default: byte 1 is the first token tag of an LZ77 stream (after the
    # magic byte). Setting it to 0x07 yields an invalid tag.
    idx = int(sys.argv[2]) if len(sys.argv) > 2 else 1
    value = int(sys.argv[3], 0) if len(sys.argv) > 3 else 0x07
    if idx >= len(b):
        print(f"Offset {idx} beyond end of file ({len(b)} bytes).")
        raise SystemExit(2)

    b[idx] = value
    p.write_bytes(bytes(b))
    print(f"Corrupted 1 byte at offset {idx} in {p}")

if __name__ == "__main__":
    main()
