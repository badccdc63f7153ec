"""ApplyTrack - job application tracker."""
