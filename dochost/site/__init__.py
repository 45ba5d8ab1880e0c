"""
Public site process: resolves tenants by host and gates password-protected subdomains
"""
