TEST_BUCKET_NAME = "test-task-files"
TEST_AWS_REGION = "us-east-1"
TEST_TASK_ID = "T1"

TEST_FILE_CONTENT = b"hello"
TEST_FILE_CONTENT_B64 = "aGVsbG8="
TEST_FILE_CONTENT_TYPE = "text/plain"
TEST_PDF_CONTENT = b"%PDF-1.4\n1 0 obj\n<<>>\nendobj\ntrailer\n<</Root 1 0 R>>\n%%EOF"
TEST_PDF_CONTENT_TYPE = "application/pdf"
