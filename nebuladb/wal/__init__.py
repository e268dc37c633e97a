"""Write-ahead log entry format and log configuration."""