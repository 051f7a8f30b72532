from __future__ import annotations
from dataclasses import dataclass, field, fields
import yaml
from pathlib import Path

from .utils.logging import get_logger

logger = get_logger(__name__)


_POSITIVE_INT_FIELDS = (
    "l1_num_blocks", "l1_block_size", "l2_num_blocks", "l2_block_size", "l2_ways",
    "victim_buffer_size", "write_buffer_size", "prefetch_buffer_size", "prefetch_threshold",
)


def is_power_of_two(n: int) -> bool:
    return (n > 0) and (n & (n - 1) == 0)


@dataclass
class HierarchyConfig:
    """Geometry of the two-level hierarchy and its auxiliary buffers.

    Block sizes are counted in words. The defaults are the reference setup:
    a 2K-word direct-mapped L1 and a 16K-word 8-way L2, both with 16-word blocks.
    """
    # L1 (direct-mapped)
    l1_num_blocks: int = 128
    l1_block_size: int = 16

    # L2 (set-associative)
    l2_num_blocks: int = 1024
    l2_block_size: int = 16
    l2_ways: int = 8

    # Auxiliary buffers between L1 and L2
    victim_buffer_size: int = 4
    write_buffer_size: int = 4
    prefetch_buffer_size: int = 4
    prefetch_threshold: int = 2  # accesses to a block before it is admitted to the prefetch buffer

    # Input selection
    workload: str = "default"
    trace_file: str = ""

    # Config file
    config_file: str = ""

    # Reporting
    report_dir: str = "out/default_run"

    # Derived properties
    l1_offset_bits: int = field(init=False)
    l2_offset_bits: int = field(init=False)
    l2_num_sets: int = field(init=False)

    def __post_init__(self):
        for name in _POSITIVE_INT_FIELDS:
            value = getattr(self, name)
            # bool is an int subclass but never a valid count
            if isinstance(value, bool) or not isinstance(value, int) or not value > 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}.")

        if not is_power_of_two(self.l1_block_size):
            raise ValueError("L1 block size must be a power of two for bitwise address decomposition.")
        if not is_power_of_two(self.l2_block_size):
            raise ValueError("L2 block size must be a power of two for bitwise address decomposition.")
        if self.l2_num_blocks % self.l2_ways != 0:
            raise ValueError("Number of L2 blocks must be a multiple of associativity.")

        self.l1_offset_bits = self.l1_block_size.bit_length() - 1
        self.l2_offset_bits = self.l2_block_size.bit_length() - 1
        self.l2_num_sets = self.l2_num_blocks // self.l2_ways

    def update_from_yaml(self, yaml_path: str):
        """Updates config fields from a YAML file."""
        with open(yaml_path, 'r') as f:
            yaml_config = yaml.safe_load(f) or {}
        field_names = {fld.name for fld in fields(self) if fld.init}
        for key, value in yaml_config.items():
            if key in field_names:
                setattr(self, key, value)
            else:
                logger.warning(f"Ignoring unknown config key '{key}' in {yaml_path}")

    @classmethod
    def from_args(cls, args) -> HierarchyConfig:
        """Factory method to create a HierarchyConfig from parsed argparse arguments."""
        config = cls()

        # 1. Load from YAML config file if provided
        if hasattr(args, 'config') and args.config:
            config.config_file = args.config
            if Path(config.config_file).exists():
                config.update_from_yaml(config.config_file)
            else:
                logger.warning(f"Config file {config.config_file} not found.")

        # 2. Override with command-line arguments
        field_names = {fld.name for fld in fields(config) if fld.init}
        arg_dict = vars(args)
        for key, value in arg_dict.items():
            if value is not None and key in field_names:
                setattr(config, key, value)

        config.__post_init__()
        return config
