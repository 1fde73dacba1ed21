import importlib

mod = "openapijsons"
class LazyLoader:
    """
    Lazy loader for the openapijsons functions to speed up startup time.
    """
    def __init__(self, mappings):
        self._modules = {}
        self._mappings = mappings

    def _load_module(self, module_name):
        if module_name not in self._modules:
            self._modules[module_name] = importlib.import_module(module_name)
        return self._modules[module_name]

    def __getattr__(self, item):
        if item in self._mappings:
            module_name, attr_name = self._mappings[item]
            module = self._load_module(module_name)
            return getattr(module, attr_name)
        elif item.startswith('__'):
            raise AttributeError(f"module {mod!r} has no attribute {item!r}")
        else:
            return self._load_module(f"{mod}.{item}")

# Define the public names and their corresponding module paths
_mappings = {
    "OpenApiToJsonSchemaConverter": (f"{mod}.openapitojsons", "OpenApiToJsonSchemaConverter"),
    "convert_openapi_to_json_schema": (f"{mod}.openapitojsons", "convert_openapi_to_json_schema"),
    "convert_openapi_to_json_schema_files": (f"{mod}.openapitojsons", "convert_openapi_to_json_schema_files"),
    "JsonSchemaDraft": (f"{mod}.drafts", "JsonSchemaDraft"),
    "MessageCollector": (f"{mod}.messages", "MessageCollector"),
    "StructuralError": (f"{mod}.messages", "StructuralError"),
}

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    return getattr(_lazy_loader, name)
