#!/usr/bin/env python3
"""Build `src/fix16_math/fix16_sinusize_table.h`.

Arcsine remap of a linear ramp over [-1, 1], normalized to [0, 1] and
stored as 16-bit fixed point.
"""
import argparse
import enum
import errno
import math
import os
import sys
from dataclasses import dataclass
from typing import List, Optional

import matplotlib.pyplot as plt
import numpy as np

# === Config ===
TABLE_SIZE  = 512
FIX16_SCALE = 1 << 16
FIX16_MAX   = 0xFFFF
OUTPUT_PATH = os.path.join("src", "fix16_math", "fix16_sinusize_table.h")

# Firmware root, the header path above is relative to it
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

REGEN_COMMAND = "python firmware/dev-tools/gen_sinusize_lut.py"


@dataclass(frozen=True)
class TableConfig:
    table_size: int = TABLE_SIZE
    scale: int = FIX16_SCALE
    max_value: int = FIX16_MAX
    output_path: str = OUTPUT_PATH

    def __post_init__(self):
        n = self.table_size
        # SINUSIZE_TABLE_SIZE_BITS is only exact for powers of two
        if n < 2 or n & (n - 1):
            raise ValueError(f"table size must be a power of two >= 2, got {n}")


class WriteError(enum.Enum):
    NOT_FOUND = "not_found"
    PERMISSION = "permission"
    IS_DIRECTORY = "is_directory"
    OTHER = "other"


@dataclass
class WriteResult:
    path: str
    error: Optional[WriteError] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None


# -----------------------------
# Table generation
# -----------------------------
def generate_samples(table_size: int) -> np.ndarray:
    """Sample (asin(t) * 2/pi + 1) / 2 at table_size points, t in [-1, 1].

    Both endpoints hit the domain extremes exactly, so the first sample is
    0.0 and the last one is 1.0.
    """
    t = -1.0 + np.arange(table_size) * 2 / (table_size - 1)
    return (np.arcsin(t) * 2 / np.pi + 1) / 2


def to_fix16(x, scale: int = FIX16_SCALE):
    return np.floor(np.asarray(x) * scale + 0.5).astype(np.int64)


def encode_samples(samples, scale: int = FIX16_SCALE, max_value: int = FIX16_MAX) -> np.ndarray:
    encoded = to_fix16(samples, scale)
    # hacky clamp: 1.0 encodes to 65536. Upper bound only, keeps the table
    # bit-compatible with existing builds.
    return np.minimum(encoded, max_value)


def build_table(config: Optional[TableConfig] = None) -> np.ndarray:
    config = config or TableConfig()
    samples = generate_samples(config.table_size)
    return encode_samples(samples, config.scale, config.max_value)


# -----------------------------
# Header output
# -----------------------------
def table_size_bits(table_size: int) -> int:
    return int(round(math.log2(table_size)))


def render_header(table, table_size: int) -> str:
    if len(table) != table_size:
        raise ValueError(f"table has {len(table)} entries, expected {table_size}")

    values = ",\n".join(str(int(v)) for v in table)
    return f"""#ifndef __FIX16_SINUSIZE_TABLE__
#define __FIX16_SINUSIZE_TABLE__

// This is autogenerated file, do not edit.
// Use `{REGEN_COMMAND}` to regenerate.

#define SINUSIZE_TABLE_SIZE {table_size}
#define SINUSIZE_TABLE_SIZE_BITS {table_size_bits(table_size)}


static const uint16_t sinusize_table[SINUSIZE_TABLE_SIZE] = {{
{values}
}};


#endif
"""


def _classify(exc: OSError) -> WriteError:
    if isinstance(exc, FileNotFoundError) or exc.errno == errno.ENOENT:
        return WriteError.NOT_FOUND
    if isinstance(exc, PermissionError) or exc.errno in (errno.EACCES, errno.EPERM, errno.EROFS):
        return WriteError.PERMISSION
    if isinstance(exc, IsADirectoryError) or exc.errno == errno.EISDIR:
        return WriteError.IS_DIRECTORY
    return WriteError.OTHER


def write_header(text: str, path: str) -> WriteResult:
    """Overwrite path with text. Parent directories are not created."""
    try:
        with open(path, "w", newline="\n") as f:
            f.write(text)
    except OSError as e:
        return WriteResult(path, _classify(e), str(e))
    return WriteResult(path)


def resolve_output(config: TableConfig, base_dir: Optional[str] = None) -> str:
    return os.path.join(base_dir if base_dir is not None else BASE_DIR, config.output_path)


def generate(config: Optional[TableConfig] = None, base_dir: Optional[str] = None) -> WriteResult:
    config = config or TableConfig()
    table = build_table(config)
    text = render_header(table, config.table_size)
    return write_header(text, resolve_output(config, base_dir))


# -----------------------------
# CLI
# -----------------------------
def _table_size(value: str) -> int:
    try:
        TableConfig(table_size=int(value))
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not a power of two >= 2")
    return int(value)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate the fix16 sinusize lookup table header")
    parser.add_argument("--size", type=_table_size, default=TABLE_SIZE,
                        help=f"Table size, power of two (default: {TABLE_SIZE})")
    parser.add_argument("--base-dir", type=str, default=BASE_DIR,
                        help="Directory the output path is resolved against (default: firmware root)")
    parser.add_argument("--output", type=str, default=OUTPUT_PATH,
                        help=f"Header path, absolute or relative to --base-dir (default: {OUTPUT_PATH})")
    parser.add_argument("--plot", action="store_true", help="Plot the remap curve")
    parser.add_argument("-v", "--verbose", action="store_true", help="Report the written file")
    return parser.parse_args(argv)


def plot_table(table, config: TableConfig):
    x = np.linspace(-1.0, 1.0, config.table_size)
    plt.figure(figsize=(8, 4))
    plt.plot(x, table, label="sinusize_table")
    plt.plot(x, (x + 1) / 2 * config.max_value, "--", label="linear")
    plt.xlabel("t")
    plt.ylabel("fix16")
    plt.title(f"Sinusize remap ({config.table_size} entries)")
    plt.legend()
    plt.tight_layout()
    plt.show()


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    config = TableConfig(table_size=args.size, output_path=args.output)

    result = generate(config, args.base_dir)
    if not result.ok:
        print(f"Error: {result.message}", file=sys.stderr)
        return 1

    if args.verbose:
        print(f"Saved {result.path} with {config.table_size} entries")

    if args.plot:
        plot_table(build_table(config), config)

    return 0


if __name__ == "__main__":
    sys.exit(main())
