import json
import os

import jsonschema

from .exceptions import ImageInventoryError


class ConfigLoader:
    DEFAULTS = {
        "cluster": None,
        "region": "us-east-1",
        "profile": None,
        "max_workers": 5,
        "batch_size": 100,
        "connect_timeout": 10,
        "read_timeout": 30,
        "max_attempts": 5,
    }

    SCHEMA = {
        "type": "object",
        "properties": {
            "cluster": {"type": "string", "minLength": 1},
            "region": {"type": "string", "minLength": 1},
            "profile": {"type": "string"},
            "max_workers": {"type": "integer", "minimum": 1},
            "batch_size": {"type": "integer", "minimum": 1, "maximum": 100},
            "connect_timeout": {"type": "number", "exclusiveMinimum": 0},
            "read_timeout": {"type": "number", "exclusiveMinimum": 0},
            "max_attempts": {"type": "integer", "minimum": 1},
        },
        "additionalProperties": False,
    }

    def __init__(self, config_path=None):
        self.config_path = config_path

    def validate_schema(self, config):
        try:
            jsonschema.validate(instance=config, schema=self.SCHEMA)
        except jsonschema.exceptions.ValidationError as e:
            raise ImageInventoryError(f"Configuration validation failed: {e.message}")

    def read_config_file(self):
        if self.config_path is None:
            return {}
        if not os.path.exists(self.config_path):
            raise ImageInventoryError(f"Config file not found: {self.config_path}")

        with open(self.config_path, "r") as f:
            try:
                config = json.load(f)
            except json.JSONDecodeError as e:
                raise ImageInventoryError(f"Failed to parse JSON config: {e}")

        self.validate_schema(config)
        return config

    def load_config(self, overrides=None):
        """Merge defaults, the optional config file and command line overrides.

        Overrides whose value is None are treated as not given, so an unset
        flag never hides a value from the config file.
        """
        config = dict(self.DEFAULTS)
        config.update(self.read_config_file())

        flags = {k: v for k, v in (overrides or {}).items() if v is not None}
        self.validate_schema(flags)
        config.update(flags)

        if not config["cluster"]:
            raise ImageInventoryError("--cluster is required")
        return config
