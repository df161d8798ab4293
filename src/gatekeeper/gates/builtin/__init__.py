"""Built-in gates, found by name through ModuleGateLoader.

Each module here is named after its gate and defines a ``Gate`` class.
"""
