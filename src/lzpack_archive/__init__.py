"""lzpack archive - folder framing, benchmarks and the command line."""
from .archive import collect_files, pack_folder, unpack_archive

__all__ = ["collect_files", "pack_folder", "unpack_archive"]
