"""Message templates for service errors."""

MSG_FILE_NOT_FOUND = "File with id %s not found"
MSG_FILE_INVALID_NAME = "Invalid file name"
MSG_FILE_NOT_IN_WORKSPACE = "File with id %s does not belong to workspace with id %s"
MSG_USER_NOT_FOUND = "User with id %s not found"
MSG_USER_ALREADY_EXIST = "User with username %s already exist"
MSG_INVALID_CREDENTIALS = "Incorrect username or password"
MSG_WORKSPACE_NOT_FOUND = "Workspace with id %s not found"
MSG_WORKSPACE_ALREADY_EXIST = "Workspace with name %s already exist"
MSG_WORKSPACE_ALREADY_LINKED = "Workspace with id %s already linked to user"
MSG_WORKSPACE_NOT_LINKED_TO_USER = "Workspace with id %s is not linked to user with id %s"
MSG_JWT_ERROR = "Jwt token not valid"
MSG_BUCKET_CREATE_ERROR = "Error while creating bucket: %s"
MSG_FILE_UPLOAD_ERROR = "Error uploading file to S3: %s"
MSG_FILE_DELETE_ERROR = "Error deleting file in S3: %s"
MSG_FILE_DOWNLOAD_ERROR = "Error downloading file from S3: %s"
MSG_FOLDER_CREATE_ERROR = "Error creating folder in S3: %s"
MSG_FOLDER_DELETE_ERROR = "Error deleting folder in S3: %s"
MSG_DATABASE_ERROR = "Error saving changes"
MSG_FILE_ALREADY_EXIST = "File with name %s already exist in workspace with id %s"
