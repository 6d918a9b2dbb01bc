"""Remote Studio: workbench for a code workspace living on a remote host."""
