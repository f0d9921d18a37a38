"""Service layer — call-site composition returning ServiceResult.

Services may import from the domain and config layers.
They must never import from commands or output.
"""
