"""Schema configuration: loading and the read-only rule store."""

from .load import load_config, load_rule_store, parse_config_text
from .store import CustomTagDefinition, RuleStore

__all__ = ["CustomTagDefinition", "RuleStore", "load_config", "load_rule_store", "parse_config_text"]
