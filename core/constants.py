"""Common constants shared across tfiam modules."""

POLICY_VERSION = "2012-10-17"

DEFAULT_PROVIDER = "aws"
SUPPORTED_PROVIDER = "aws"

CONFIG_SUFFIX = ".tf"
STATE_FILE_NAME = "terraform.tfstate"
STATE_FILE_SUFFIX = ".tfstate"
STATE_FILE_MARKERS = ("s3", "backend")

DATA_PREFIX = "data."
READ_ONLY_MARKERS = ("Describe", "Get", "List")

# Remote state object storage plus the lock table.
STATE_BACKEND_ACTIONS = (
    "s3:GetObject",
    "s3:PutObject",
    "s3:ListBucket",
    "s3:DeleteObject",
    "dynamodb:GetItem",
    "dynamodb:PutItem",
    "dynamodb:DeleteItem",
    "dynamodb:DescribeTable",
)

# A service contributing more distinct actions than this collapses to "service:*".
WILDCARD_THRESHOLD = 5

GENERATED_NAME = "generated"
GENERATED_POLICY_NAME = "tfiam-generated"
