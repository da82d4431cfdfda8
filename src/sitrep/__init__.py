"""Developer-workflow status gatherers for gt, gh, bd and git."""
