"""Command interfaces, file system access and IPv4 network calculations."""