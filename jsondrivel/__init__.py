import importlib

mod = "jsondrivel"
class LazyLoader:
    """    
    Lazy loader for the jsondrivel functions to speed up startup time.    
    """
    def __init__(self, mappings):
        self._modules = {}
        self._mappings = mappings

    def _load_module(self, module_name):
        if module_name not in self._modules:
            self._modules[module_name] = importlib.import_module(module_name)
        return self._modules[module_name]

    def __getattr__(self, item):
        if item.startswith('__'):
            raise AttributeError(item)
        if item in self._mappings:
            module_name, func_name = self._mappings[item]
            module = self._load_module(module_name)
            return getattr(module, func_name)
        else:
            return self._load_module(f"{mod}.{item}")

# Define the functions and their corresponding module paths
_mappings = {
    "InferenceOptions": (f"{mod}.schema_model", "InferenceOptions"),
    "EnumInference": (f"{mod}.schema_model", "EnumInference"),
    "InvalidOptionsError": (f"{mod}.schema_model", "InvalidOptionsError"),
    "infer_schema": (f"{mod}.schema_inference", "infer_schema"),
    "infer_schema_from_iter": (f"{mod}.schema_inference", "infer_schema_from_iter"),
    "merge_schemas": (f"{mod}.schema_inference", "merge_schemas"),
    "infer_schema_from_text": (f"{mod}.jsontoschema", "infer_schema_from_text"),
    "infer_schema_from_files": (f"{mod}.jsontoschema", "infer_schema_from_files"),
    "produce": (f"{mod}.schematodata", "produce"),
    "render_schema": (f"{mod}.schematotext", "render_schema"),
    "convert_schema_to_json_schema": (f"{mod}.schematojsons", "convert_schema_to_json_schema"),
    "convert_json_schema_to_schema": (f"{mod}.jsonstoschema", "convert_json_schema_to_schema"),
    "check_json_schema": (f"{mod}.jsonstoschema", "check_json_schema"),
    "convert_schema_to_markdown": (f"{mod}.schematomd", "convert_schema_to_markdown"),
    "validate_value_against_schema": (f"{mod}.shapevalidator", "validate_value_against_schema"),
}

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    return getattr(_lazy_loader, name)
