"""Website editor backend: revision trees, forks, engagement and feeds."""
