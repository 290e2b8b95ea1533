# Simple TUI using Rich. Starts both MCP servers and queries their tools.
from rich.console import Console
from rich.table import Table
from rich.prompt import Prompt
from rich.markup import escape
from client.stdio_client import StdioClient, McpCallError
from client.cli_client import result_text
from models.constants import ENERGY_TYPE_CODES, STATE_CODES

console = Console()

def show_result(result: dict):
    style = "red" if result.get("isError") else "green"
    console.print(f"[{style}]{escape(result_text(result))}[/{style}]")

def ask_sums_args() -> dict:
    args = {"type": Prompt.ask("Energieträger", choices=list(ENERGY_TYPE_CODES), default="Photovoltaik")}
    state = Prompt.ask("Bundesland (leer = alle)", choices=[""] + list(STATE_CODES), default="", show_choices=False)
    plz = Prompt.ask("Postleitzahl (optional)", default="")
    county = Prompt.ask("Landkreis (optional)", default="")
    for key, value in (("state", state), ("plz", plz), ("county", county)):
        if value.strip():
            args[key] = value.strip()
    return args

def show_tools(clients: dict):
    table = Table(title="Tools")
    table.add_column("Server"); table.add_column("Tool"); table.add_column("Description")
    for server, client in clients.items():
        for t in client.list_tools():
            table.add_row(server, t["name"], t.get("description", ""))
    console.print(table)

def main():
    console.print("[bold cyan]MaStR / NTP MCP TUI[/bold cyan]")
    clients = {"mastr": StdioClient(server="mastr"), "ntp": StdioClient(server="ntp")}
    try:
        for c in clients.values():
            c.initialize()
        while True:
            console.print("\n[bold]Menu[/bold]: 1) get-sums  2) get-time  3) tools/list  0) exit")
            choice = Prompt.ask("Choose", choices=["1", "2", "3", "0"], default="1")
            if choice == "0":
                break
            try:
                if choice == "1":
                    show_result(clients["mastr"].call_tool("get-sums", ask_sums_args()))
                elif choice == "2":
                    show_result(clients["ntp"].call_tool("get-time"))
                else:
                    show_tools(clients)
            except McpCallError as ex:
                console.print(f"[red]{escape(str(ex))}[/red]")
    finally:
        for c in clients.values():
            c.close()

if __name__ == "__main__":
    main()
