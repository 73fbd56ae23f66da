from k3sinfra.config import DeploymentConfig
from k3sinfra.models import DeploymentRecord
from k3sinfra.utils.display import render_connection_info, service_urls, write_summary

RECORD = DeploymentRecord(
    region="us-east-2",
    key_name="vxg-demo-key",
    vpc_id="vpc-12345",
    security_group_id="sg-12345",
    instance_id="i-12345",
    public_ip="203.0.113.10",
)

def test_service_urls():
    urls = service_urls("203.0.113.10")

    assert urls == {
        "Kubernetes API": "https://203.0.113.10:6443",
        "Nginx": "http://203.0.113.10:30080",
        "Prometheus": "http://203.0.113.10:30090",
        "Grafana": "http://203.0.113.10:30300",
    }

def test_render_connection_info():
    """Test the terminal instructions include SSH and service access."""
    config = DeploymentConfig(output_dir="out")

    text = render_connection_info(RECORD, config)

    assert "Instance ID: i-12345" in text
    assert "ssh -i out/vxg-demo-key.pem ubuntu@203.0.113.10" in text
    assert "Grafana: http://203.0.113.10:30300 (admin/vxg-demo-2024)" in text
    assert "sudo tail -f /var/log/cloud-init-output.log" in text
    assert "sed -i 's/127.0.0.1/203.0.113.10/g' ./kubeconfig" in text

def test_write_summary(tmp_path):
    """Test the summary file lists identifiers, URLs and Grafana credentials."""
    config = DeploymentConfig(output_dir=str(tmp_path))
    path = tmp_path / "deployment-info.txt"

    write_summary(RECORD, config, str(path))

    content = path.read_text()
    assert content.startswith("VXG K3s Deployment Information\n")
    assert "Security Group: sg-12345" in content
    assert "Key Pair: vxg-demo-key" in content
    assert "- Prometheus: http://203.0.113.10:30090" in content
    assert "- Username: admin" in content
    assert "- Password: vxg-demo-2024" in content
