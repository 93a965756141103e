from .options import EngineOptions, GammaMethod
from .schema import KeySpec, OPTION_SPECS, make_choices_validator, make_range_validator, validate_options
from .loader import load_options, parse_value

__all__ = [
	"EngineOptions",
	"GammaMethod",
	"KeySpec",
	"OPTION_SPECS",
	"make_choices_validator",
	"make_range_validator",
	"validate_options",
	"load_options",
	"parse_value",
]
