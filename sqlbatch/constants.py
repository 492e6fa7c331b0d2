DEFAULT_SEPARATOR = "go"
DEFAULT_ENCODING = "utf-8"
CONFIG_FILE = "sqlbatch.config.yml"

# Largest ``GO n`` count honoured; anything above runs the batch once.
MAX_REPEAT_COUNT = 2**31 - 1
