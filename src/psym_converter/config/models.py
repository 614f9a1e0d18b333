from dataclasses import dataclass

from psym_converter.common.types import DEFAULT_CLOCK_HZ, DEFAULT_SAMPLE_RATE_HZ

OUTPUT_FORMATS = ("psym", "python")

@dataclass
class ConversionConfig:
    clock_hz: int = DEFAULT_CLOCK_HZ
    sample_rate_hz: int = DEFAULT_SAMPLE_RATE_HZ
    output_format: str = "psym"  # "psym", "python"
    skip_duplicates: bool = True
    verbose: bool = False

    # @intent:responsibility コアに渡す前に、出力形式のフィールド幅に収まるかを検証します。
    def validate(self) -> None:
        if not 0 <= self.clock_hz <= 0xFFFFFFFF:
            raise ValueError(f"Clock frequency {self.clock_hz} Hz does not fit in 4 bytes.")
        if not 0 <= self.sample_rate_hz <= 0xFF:
            raise ValueError(f"Sample rate {self.sample_rate_hz} Hz must be between 0 and 255.")
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(f"Unsupported output format: {self.output_format}")
