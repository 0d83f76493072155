# Cache keys for the recipe collection


class CacheKeyGenerator:
    LIST_ALL = "recipes"

    def __init__(self, prefix: str = ""):
        self.prefix = prefix

    def list_all(self) -> str:
        if not self.prefix:
            return self.LIST_ALL
        return f"{self.prefix}:{self.LIST_ALL}"
