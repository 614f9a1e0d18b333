import yaml
from typing import Dict, Any
from .models import ConversionConfig

class ConfigLoader:
    def load_from_file(self, path: str) -> ConversionConfig:
        with open(path, 'r') as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid config file: {e}")
        return self._parse_config(data or {})

    def _parse_config(self, data: Dict[str, Any]) -> ConversionConfig:
        if not isinstance(data, dict):
            raise ValueError(f"Invalid config format: expected a mapping, got {type(data).__name__}")

        defaults = ConversionConfig()
        config = ConversionConfig(
            clock_hz=self._parse_int(data.get("clock", defaults.clock_hz)),
            sample_rate_hz=self._parse_int(data.get("rate", defaults.sample_rate_hz)),
            output_format=str(data.get("format", defaults.output_format)).lower(),
            skip_duplicates=bool(data.get("skip_duplicates", defaults.skip_duplicates)),
            verbose=bool(data.get("verbose", defaults.verbose)),
        )
        config.validate()
        return config

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            if value.startswith("0x"):
                return int(value, 16)
            return int(value)
        raise ValueError(f"Invalid integer format: {value}")
