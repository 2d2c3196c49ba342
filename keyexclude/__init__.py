from keyexclude.errors import ConfigurationError, ParseError, SwapError
from keyexclude.exclude import STRATEGIES, broadcastExclude, excludeKeys, shuffleExclude
from keyexclude.files import FILTERED_SUFFIX, swapIn, writeSingle
from keyexclude.keyset import KeySetFn, materializeKeys, parseIntegers
