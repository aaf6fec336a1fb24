import codecs
import json

from varscope.errors import ConfigurationError


def parse_json(filename):
    with codecs.open(filename, 'r', encoding='utf8') as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"{filename} is not valid JSON: {e}") from e
