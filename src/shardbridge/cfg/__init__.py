from .settings import (
    Settings as Settings,
    PropertiesSettings as PropertiesSettings,
    SettingsView as SettingsView,
    FilteredSettings as FilteredSettings,
)
from .units import (
    parse_time_value as parse_time_value,
    parse_byte_size as parse_byte_size,
)
from . import options as options
