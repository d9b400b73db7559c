"""S3-triggered ffmpeg transcoding bridge."""
