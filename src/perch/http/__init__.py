"""HTTP value types: status registry, methods, request context, envelope."""
