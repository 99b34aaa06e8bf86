import random
import re


def generate_sku(product_name, category_name=None):
    """``<CAT>-<NAME>-<nnn>`` built from the alphanumerics of both names."""
    clean_name = re.sub(r"[^a-zA-Z0-9]", "", product_name).upper()[:8]
    clean_category = re.sub(r"[^a-zA-Z0-9]", "", category_name or "").upper()[:3]
    return f"{clean_category or 'GEN'}-{clean_name}-{random.randint(0, 999):03d}"
