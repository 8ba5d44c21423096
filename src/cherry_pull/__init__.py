"""Cherry-pick a pull request onto a release branch and propose it from a fork."""
