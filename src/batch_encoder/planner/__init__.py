"""Plan compilation for batch-encoder.

- naming: output and intermediate file names
- color: HDR/BT.709 signalling and encoder level
- mux: muxer input indexing and stream maps
- compiler: compile_plan (descriptor + request -> Plan)
"""

from batch_encoder.planner.compiler import compile_plan, split_options
from batch_encoder.planner.mux import MuxInput, MuxPurpose, build_mux_inputs
from batch_encoder.planner.naming import OutputNames, swap_ext, to_canonical

__all__ = [
    "MuxInput",
    "MuxPurpose",
    "OutputNames",
    "build_mux_inputs",
    "compile_plan",
    "split_options",
    "swap_ext",
    "to_canonical",
]
