"""CRM Admin - approval workflow and administrative control layer."""
