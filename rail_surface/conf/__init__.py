"""Django settings modules shipped with rail-surface."""
