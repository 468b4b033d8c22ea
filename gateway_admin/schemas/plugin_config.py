"""JSON schemas for plugin config documents."""

id_schema = {
    "anyOf": [
        {
            "type": "string",
            "minLength": 1,
            "maxLength": 64,
            "pattern": r"^[a-zA-Z0-9-_.]+$",
        },
        {"type": "integer", "minimum": 1},
    ]
}

name_def = {"type": "string", "minLength": 1, "maxLength": 100}

desc_def = {"type": "string", "maxLength": 256}

labels_def = {
    "type": "object",
    "patternProperties": {
        ".*": {
            "type": "string",
            "pattern": r"^\S+$",
            "minLength": 1,
            "maxLength": 256,
        }
    },
}

timestamp_def = {"type": "integer"}

plugins_schema = {"type": "object"}

plugin_config_schema = {
    "type": "object",
    "properties": {
        "id": id_schema,
        "name": name_def,
        "desc": desc_def,
        "plugins": plugins_schema,
        "labels": labels_def,
        "create_time": timestamp_def,
        "update_time": timestamp_def,
    },
    "required": ["plugins"],
    "additionalProperties": False,
}

# Accepted on every plugin, whatever its own schema says
plugin_meta_schema = {
    "type": "object",
    "properties": {
        "disable": {"type": "boolean"},
        "priority": {"type": "integer"},
    },
    "additionalProperties": False,
}
