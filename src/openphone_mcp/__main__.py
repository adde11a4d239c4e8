from openphone_mcp.main import run

run()
