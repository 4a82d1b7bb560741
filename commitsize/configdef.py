"""commitsize default configuration file

Every configuration element ever used in the program must exist here.
These defaults may be overridden in the user's config file or with --set.
"""


# Number of commits to examine when none is given on the command line
default_commits = 5

# Commits touching at most this many files are sized by inspecting each diff;
# larger ones use the fast estimate from the change summary
accurate_max_files = 50

# Estimated bytes per inserted line
bytes_per_line = 100

# Estimated bytes per changed file
bytes_per_file = 5120

# Estimate used for an initial commit when nothing better can be found
initial_commit_default_bytes = 10240

# Charge for a change that doesn't touch content (mode change, rename, deletion)
metadata_change_bytes = 100

# Size the change summary is assumed to have counted for each renamed file
rename_assumed_bytes = 50000

# Wait for a key press before exiting
pause_after_complete = False

# Console coloring: 'auto', 'always' or 'never'
color = 'auto'

# Name of the git program to run
git_program = 'git'

# Character map used in git commit logs
git_comment_encoding = 'UTF-8'

# Commit subjects longer than this are truncated in the summary table
subject_width = 8
