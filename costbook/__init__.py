"""
Costbook - recipe cost-management service.
"""
