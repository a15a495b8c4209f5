"""Value types shared across Warden."""
