"""Convert package - raw capture bytes to calibrated sample streams.

Modules:
- transform: ADC byte -> calibrated float32 (scalar, array and lookup-table forms)
- decimate: start-offset and decimation sample selection
- driver: per-channel orchestration (ConversionDriver, convert_file)
"""

from .decimate import Decimator, start_point
from .driver import ConversionDriver, container_sample_rate, convert_file
from .transform import ADC_RESOLUTION, VOLTAGE_RANGE, ZERO_CODE, sample_to_value, samples_to_values, transform_table

__all__ = [
    "ADC_RESOLUTION",
    "VOLTAGE_RANGE",
    "ZERO_CODE",
    "ConversionDriver",
    "Decimator",
    "container_sample_rate",
    "convert_file",
    "sample_to_value",
    "samples_to_values",
    "start_point",
    "transform_table",
]
