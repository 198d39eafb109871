"""WorkFlow daily tracker."""
