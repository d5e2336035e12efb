"""Public JSON API for the workout tracker."""
