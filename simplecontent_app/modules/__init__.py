"""Feature modules: SimpleAuth, SimpleContent seams, file manager, navigation."""
