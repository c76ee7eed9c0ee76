"""Short link lifecycle engine: code allocation, redirects with click quotas and expiry sweeps."""
