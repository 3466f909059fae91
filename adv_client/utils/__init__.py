"""
Module: adv_client.utils
Purpose: Utility functions and helpers for adv_client
"""

from adv_client.utils.encoding import decode_base64, format_strength, from_data_url, to_data_url

__all__ = ["decode_base64", "format_strength", "from_data_url", "to_data_url"]
