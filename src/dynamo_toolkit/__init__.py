"""DynamoDB Toolkit command line package."""
