"""
Fixed message templates for kernel errors.
"""

INVALID_BINDING_TYPE = "Invalid binding type:"
CIRCULAR_DEPENDENCY = "Circular dependency found:"
NOT_REGISTERED = "No bindings found for service:"
AMBIGUOUS_MATCH = "Ambiguous match found for service:"
INVALID_METADATA = "Cannot derive dependencies of"
MISSING_PLAN = "The context has no active plan"
