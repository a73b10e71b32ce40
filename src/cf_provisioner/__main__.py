from cf_provisioner.cli import app

app(prog_name="cf-provisioner")
