"""Package with all common/shared (serializable) Models (dataclass)."""
