# -*- coding: utf-8 -*-
import zlib

APP_NAME = "PNGFuse"
APP_VERSION = "0.1.0"
APP_DESCRIPTION = "Fuse subfiles into PNG metadata"

# zlib settings tuned for the best ratio: dynamic Huffman blocks with lazy
# LZ77 matching (nice match 258), 32 KiB window.
COMPRESSION_SETTINGS = {
    "level": 9,
    "wbits": 15,
    "mem_level": 9,
    "strategy": zlib.Z_DEFAULT_STRATEGY,
}

# Batch inserts encode one chunk per task
CONCURRENCY_SETTINGS = {
    "max_workers": 8,
}

# Output naming for fuse/clean when neither --overwrite nor --output is given
OUTPUT_SETTINGS = {
    "png_extension": ".png",
    "fused_suffix": ".fused",
    "unfused_suffix": ".unfused",
}

# Logging
LOGGING_SETTINGS = {
    "level": "WARNING",        # DEBUG/INFO/WARNING/ERROR
    "log_to_file": False,
    "log_dir": "logs",
    "log_file": "pngfuse.log",
    "max_bytes": 2 * 1024 * 1024,
    "backup_count": 3,
}
