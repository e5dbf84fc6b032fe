"""Simple utilities for decoding and embedding JSON."""

import json

# Only ever found inside JSON strings, where unicode escapes are lossless
SCRIPT_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
}


def parse_json_bytes(body):
    """Decode a UTF-8 response body into JSON."""
    if isinstance(body, bytes):
        body = body.decode('utf-8')
    return json.loads(body)


def to_script_json(data):
    """Serialize data for embedding inside an inline <script> block."""
    text = json.dumps(data, ensure_ascii=False)
    for char, escaped in SCRIPT_ESCAPES.items():
        text = text.replace(char, escaped)
    return text
